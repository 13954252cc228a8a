"""Tests for the FileStation wrapper.

Runs the real SynologyClient against the in-memory stub NAS from conftest.py,
so every login/logout bracket is visible in the recorded requests.
"""

import asyncio

import pytest

from synobot.synology_gateway.errors import MalformedResponseError, SynologyApiError
from synobot.synology_gateway.filestation import FileStationService

LIST = ("SYNO.FileStation.List", "list")


@pytest.fixture
def filestation_service(make_client) -> FileStationService:
    return FileStationService(client=make_client())


class TestPathValidation:
    @pytest.mark.parametrize("path", ["/volume1/docs", "/", " /home "])
    def test_valid_paths(self, path):
        assert FileStationService.validate_path(path) is True

    @pytest.mark.parametrize("path", ["", "   ", "volume1", "/volume1/../etc", ".."])
    def test_invalid_paths(self, path):
        assert FileStationService.validate_path(path) is False

    @pytest.mark.asyncio
    async def test_invalid_path_sends_nothing(self, filestation_service, stub_nas):
        with pytest.raises(ValueError):
            await filestation_service.list_files("../secret")

        assert stub_nas.requests == []


class TestListFiles:
    @pytest.mark.asyncio
    async def test_returns_entries(self, filestation_service, stub_nas):
        stub_nas.responses[LIST] = {
            "success": True,
            "data": {
                "total": 2,
                "offset": 0,
                "files": [
                    {"path": "/home/file1.txt", "name": "file1.txt", "isdir": False, "additional": {"size": 12}},
                    {"path": "/home/subdir", "name": "subdir", "isdir": True},
                ],
            },
        }

        entries = await filestation_service.list_files("/home")

        assert [entry.name for entry in entries] == ["file1.txt", "subdir"]
        assert entries[0].size == 12
        assert entries[1].is_dir is True

    @pytest.mark.asyncio
    async def test_sends_expected_query(self, filestation_service, stub_nas):
        stub_nas.responses[LIST] = {"success": True, "data": {"files": [], "total": 0, "offset": 0}}

        await filestation_service.list_files("/volume1/shared")

        list_request = stub_nas.requests[1]
        assert list_request.url.path == "/webapi/entry.cgi"
        params = list_request.url.params
        assert params["api"] == "SYNO.FileStation.List"
        assert params["version"] == "2"
        assert params["method"] == "list"
        assert params["folder_path"] == "/volume1/shared"
        assert params["_sid"] == "stub_session_id"

    @pytest.mark.asyncio
    async def test_empty_directory(self, filestation_service, stub_nas):
        stub_nas.responses[LIST] = {"success": True, "data": {"files": [], "total": 0, "offset": 0}}

        assert await filestation_service.list_files("/empty") == []

    @pytest.mark.asyncio
    async def test_bracket_order(self, filestation_service, stub_nas):
        stub_nas.responses[LIST] = {"success": True, "data": {"files": [], "total": 0, "offset": 0}}

        await filestation_service.list_files("/home")

        assert [r.url.params["method"] for r in stub_nas.requests] == ["login", "list", "logout"]

    @pytest.mark.asyncio
    async def test_logout_after_api_error(self, filestation_service, stub_nas):
        stub_nas.responses[LIST] = {"success": False, "error": {"code": 408}}

        with pytest.raises(SynologyApiError) as exc_info:
            await filestation_service.list_files("/missing")

        assert exc_info.value.code == 408
        assert stub_nas.calls["logout"] == 1

    @pytest.mark.asyncio
    async def test_malformed_body(self, filestation_service, stub_nas):
        stub_nas.responses[LIST] = "<html>502 Bad Gateway</html>"

        with pytest.raises(MalformedResponseError):
            await filestation_service.list_files("/home")

        assert stub_nas.calls["logout"] == 1

    @pytest.mark.asyncio
    async def test_concurrent_calls_are_serialised(self, filestation_service, stub_nas):
        stub_nas.responses[LIST] = {"success": True, "data": {"files": [], "total": 0, "offset": 0}}

        await asyncio.gather(
            filestation_service.list_files("/a"),
            filestation_service.list_files("/b"),
        )

        methods = [r.url.params["method"] for r in stub_nas.requests]
        assert methods == ["login", "list", "logout", "login", "list", "logout"]
