import asyncio

from main import _load_settings, _parse_args, _run_console


def test_default_command_invokes_serve() -> None:
    args = _parse_args([])
    assert args.command == "serve"


def test_default_command_accepts_options_without_subcommand() -> None:
    args = _parse_args(["--host", "0.0.0.0", "--port", "8080"])
    assert args.command == "serve"
    assert args.host == "0.0.0.0"
    assert args.port == 8080


def test_console_subcommand_accepts_api_override(tmp_path) -> None:
    args = _parse_args(
        ["console", "--config", str(tmp_path / "none.yaml"), "--api-url", "https://users.test/users"]
    )
    assert args.command == "console"

    settings = _load_settings(args)
    assert settings.api_url == "https://users.test/users"


def test_console_drives_controller(make_controller, capsys) -> None:
    answers = iter(
        [
            "3", "5",                                 # edit user 5
            "2", "Chelsey D.", "", "1999-09-09",      # save the edit
            "4", "7",                                 # delete user 7
            "1",                                      # list
            "7",                                      # exit
        ]
    )

    async def prompt(message: str) -> str:
        return next(answers)

    async def scenario():
        controller = make_controller()
        try:
            await _run_console(controller, prompt)
        finally:
            await controller.close()
        return controller

    controller = asyncio.run(scenario())

    assert [user.id for user in controller.users] == [3, 5]
    assert controller.users[1].name == "Chelsey D."
    assert controller.users[1].email == "lucio_hettinger@annie.ca"
    assert controller.users[1].date_of_birth == "1999-09-09"

    output = capsys.readouterr().out
    assert "Editing Chelsey Dietrich" in output
    assert "2 user(s) found:" in output
    assert "Goodbye!" in output
