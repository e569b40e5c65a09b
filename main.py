"""
Session Launcher entry point

Opens an authenticated remote shell session from the command line.
"""

from session_launcher.cli import cli


def main():
    """Main entry point"""
    cli(prog_name="session-launcher")


if __name__ == "__main__":
    main()
