"""Entry-point para execução do CleanSlack (``python -m clean_slack``)."""

from clean_slack.cli import run

if __name__ == "__main__":
    run()
