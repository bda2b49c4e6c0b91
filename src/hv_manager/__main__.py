"""Allow ``python -m hv_manager``."""

from hv_manager.cli import app

if __name__ == "__main__":
    app(prog_name="hv_manager")
