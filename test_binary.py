"""Tests for the d2 binary runner and d2_format, using fake executables."""

import json

import pytest

from conftest import requires_d2, requires_posix
from d2_mcp.binary import format_source, run_d2_binary
from d2_mcp.errors import BinaryNotFoundError, FormatError
from d2_mcp.tools import D2Tools


@pytest.mark.asyncio
async def test_missing_executable_names_override(tmp_path):
    missing = str(tmp_path / "no-such-d2")

    with pytest.raises(BinaryNotFoundError) as exc_info:
        await run_d2_binary(["fmt", "-"], "a -> b", executable=missing)

    message = str(exc_info.value)
    assert missing in message
    assert "D2_PATH" in message
    assert "https://d2lang.com" in message


@pytest.mark.asyncio
async def test_format_tool_reports_missing_binary(monkeypatch, tmp_path):
    monkeypatch.setenv("D2_PATH", str(tmp_path / "no-such-d2"))

    result = await D2Tools().call("d2_format", {"d2_code": "a->b:label"})

    assert result.is_error
    assert "d2 binary not found" in result.text
    assert "D2_PATH" in result.text


@requires_posix
@pytest.mark.asyncio
async def test_pipes_stdin_and_collects_streams(make_script):
    d2 = make_script('echo "args: $@" >&2\ncat')

    result = await run_d2_binary(["fmt", "-"], "a -> b\n", executable=d2)

    assert result.stdout == "a -> b\n"
    assert result.stderr == "args: fmt -\n"
    assert result.exit_code == 0


@requires_posix
@pytest.mark.asyncio
async def test_reports_exit_code(make_script):
    d2 = make_script("exit 3")

    result = await run_d2_binary(["fmt", "-"], "a", executable=d2)

    assert result.exit_code == 3
    assert result.stdout == ""


@requires_posix
@pytest.mark.asyncio
async def test_env_override_is_read_per_call(monkeypatch, make_script):
    monkeypatch.setenv("D2_PATH", make_script("printf 'a -> b: label\\n'"))

    assert await format_source("a->b:label") == "a -> b: label\n"


@requires_posix
@pytest.mark.asyncio
async def test_format_error_prefers_stderr(make_script):
    d2 = make_script("echo 'partial' \necho '  err: failed to parse  ' >&2\nexit 1")

    with pytest.raises(FormatError) as exc_info:
        await format_source("a: {", executable=d2)

    assert exc_info.value.message == "err: failed to parse"
    assert exc_info.value.exit_code == 1


@requires_posix
@pytest.mark.asyncio
async def test_format_error_falls_back_to_stdout(make_script):
    d2 = make_script("echo ' bad input '\nexit 2")

    with pytest.raises(FormatError, match="^bad input$"):
        await format_source("a: {", executable=d2)


@requires_posix
@pytest.mark.asyncio
async def test_format_error_unknown(make_script):
    d2 = make_script("exit 1")

    with pytest.raises(FormatError, match="^Unknown error$"):
        await format_source("a: {", executable=d2)


@requires_posix
@pytest.mark.asyncio
async def test_format_tool_exit_error(monkeypatch, make_script):
    monkeypatch.setenv("D2_PATH", make_script("echo 'err: stdin:1:4: unexpected' >&2\nexit 1"))

    result = await D2Tools().call("d2_format", {"d2_code": "a: {"})

    assert result.is_error
    assert result.text == "Error formatting D2 code: err: stdin:1:4: unexpected"


@requires_d2
@pytest.mark.asyncio
async def test_real_d2_format_only_changes_whitespace():
    source = "a->b:label"

    formatted = await format_source(source)

    assert formatted != source
    assert "".join(formatted.split()) == "".join(source.split())


@requires_d2
@pytest.mark.asyncio
async def test_real_d2_validate_and_render():
    tools = D2Tools()

    svg = await tools.call("d2_render", {"d2_code": "a -> b: connects"})
    ascii_art = await tools.call("d2_render", {"d2_code": "a -> b: connects", "ascii": True})
    invalid = await tools.call("d2_validate", {"d2_code": "a: {"})

    assert not svg.is_error
    assert svg.text.lstrip().startswith("<?xml")
    assert not ascii_art.is_error
    assert ascii_art.text.strip()
    assert "<?xml" not in ascii_art.text
    assert json.loads(invalid.text)["valid"] is False
