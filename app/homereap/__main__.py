"""Allow ``python -m homereap``; the detached child is launched this way."""

from homereap.cli.main import app

if __name__ == "__main__":
    app(prog_name="homereap")
