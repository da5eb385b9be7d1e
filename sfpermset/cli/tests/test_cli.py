import json
import logging
from unittest import mock

import click
import pytest
import requests
import responses
from click.testing import CliRunner

from sfpermset.cli import cli
from sfpermset.cli.logger import init_logger
from sfpermset.core.exceptions import AuthenticationNotConfigured
from sfpermset.tests.util import ADDRESS, ASSIGNMENT_URL, QUERY_URL, user_query_result


@pytest.fixture
def context_file(tmp_path):
    path = tmp_path / "context.yml"
    path.write_text(
        f"environment:\n  ADDRESS: {ADDRESS}\nsecrets:\n  BEARER_AUTH_TOKEN: TOKEN\n"
    )
    return str(path)


def _add_happy_path():
    responses.add(responses.GET, QUERY_URL, json=user_query_result("005000000000001"))
    responses.add(
        responses.POST, ASSIGNMENT_URL, json={"id": "0Pa000000000001"}, status=201
    )


class TestInvokeCommand:
    @responses.activate
    def test_json(self, context_file):
        _add_happy_path()

        result = CliRunner().invoke(
            cli.cli,
            [
                "invoke",
                "test.user@example.com",
                "0PS000000000001",
                "--context",
                context_file,
                "--json",
            ],
        )

        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == {
            "status": "success",
            "username": "test.user@example.com",
            "userId": "005000000000001",
            "permissionSetId": "0PS000000000001",
            "assignmentId": "0Pa000000000001",
            "address": ADDRESS,
        }

    @responses.activate
    def test_table(self, context_file):
        _add_happy_path()

        result = CliRunner().invoke(
            cli.cli,
            ["invoke", "test.user@example.com", "0PS000000000001", "--context", context_file],
        )

        assert result.exit_code == 0, result.output
        assert "0Pa000000000001" in result.output
        assert "userId" in result.output

    @mock.patch("sfpermset.tasks.permsets.invoke")
    def test_options_become_params(self, invoke):
        invoke.return_value = {"status": "success"}

        with mock.patch.dict(
            "os.environ", {"BEARER_AUTH_TOKEN": "TOKEN"}, clear=True
        ):
            result = CliRunner().invoke(
                cli.cli,
                [
                    "invoke",
                    "a@b.com",
                    "0PS1",
                    "--address",
                    ADDRESS,
                    "--api-version",
                    "v58.0",
                ],
            )

        assert result.exit_code == 0, result.output
        params, context = invoke.call_args[0]
        assert params == {
            "username": "a@b.com",
            "permissionSetId": "0PS1",
            "address": ADDRESS,
            "apiVersion": "v58.0",
        }
        assert context.secrets == {"BEARER_AUTH_TOKEN": "TOKEN"}


class TestHaltCommand:
    def test_halt(self):
        result = CliRunner().invoke(
            cli.cli, ["halt", "--username", "a@b.com", "--reason", "timeout", "--json"]
        )

        assert result.exit_code == 0, result.output
        output = json.loads(result.output)
        assert output["status"] == "halted"
        assert output["username"] == "a@b.com"
        assert output["reason"] == "timeout"

    def test_halt__requires_reason(self):
        result = CliRunner().invoke(cli.cli, ["halt"])
        assert result.exit_code == 2


class TestMain:
    @mock.patch("sfpermset.cli.cli.init_logger")
    @mock.patch("sfpermset.cli.cli.cli")
    def test_main(self, cli_group, init_logger):
        cli.main(["sfpermset", "halt", "--reason", "x"])
        cli_group.assert_called_once_with(
            ["halt", "--reason", "x"], standalone_mode=False
        )
        init_logger.assert_called_once_with(debug=False)

    @mock.patch("sfpermset.cli.cli.init_logger")
    @mock.patch("sfpermset.cli.cli.cli")
    def test_main__debug(self, cli_group, init_logger):
        args = ["sfpermset", "--debug", "halt"]
        cli.main(args)
        cli_group.assert_called_once_with(["halt"], standalone_mode=False)
        init_logger.assert_called_once_with(debug=True)
        # the caller's list is left alone
        assert "--debug" in args

    @mock.patch("sfpermset.cli.cli.init_logger", mock.Mock())
    @mock.patch("sfpermset.cli.cli.handle_exception")
    @mock.patch("sfpermset.cli.cli.cli")
    def test_main__error(self, cli_group, handle_exception):
        error = AuthenticationNotConfigured("No authentication configured.")
        cli_group.side_effect = error

        with pytest.raises(SystemExit) as e:
            cli.main(["sfpermset", "invoke", "a", "b"])

        assert e.value.code == 1
        handle_exception.assert_called_once_with(error, should_show_stacktraces=False)

    @mock.patch("sfpermset.cli.cli.init_logger", mock.Mock())
    @mock.patch("sfpermset.cli.cli.cli")
    def test_main__abort(self, cli_group):
        cli_group.side_effect = click.Abort()

        with pytest.raises(SystemExit) as e:
            cli.main(["sfpermset", "invoke", "a", "b"])

        assert e.value.code == 1


class TestHandleException:
    def test_generic(self, capsys):
        cli.handle_exception(AuthenticationNotConfigured("No authentication configured."))
        assert "Error: No authentication configured." in capsys.readouterr().err

    def test_click_exception(self, capsys):
        cli.handle_exception(click.UsageError("bad usage"))
        assert "Error: bad usage" in capsys.readouterr().err

    def test_connection_error(self, capsys):
        cli.handle_exception(requests.exceptions.ConnectionError())
        assert "error connecting to Salesforce" in capsys.readouterr().err


def test_init_logger():
    logger = init_logger()
    assert logger is logging.getLogger("sfpermset")
    assert len(logger.handlers) == 1
    assert logger.level == logging.INFO
    assert logger.propagate is False
