"""Allow ga4mp to be executable through `python -m ga4mp`."""
from ga4mp.cli import cli


if __name__ == "__main__":  # pragma: no cover
    cli(prog_name="ga4mp")
