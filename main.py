#!/usr/bin/env python3
"""Trade-in Field Mapping Tool - Entry point."""
from colorama import Fore, Style

from tradein_mapping.cli.commands import cli


def print_banner():
    """Print application banner."""
    print(f"{Fore.CYAN}{'=' * 44}")
    print(f"{Fore.CYAN}║   {Fore.WHITE}Trade-in Field Mapping Tool{Fore.CYAN}          ║")
    print(f"{Fore.CYAN}║   {Fore.WHITE}Commerce Platform Payload Builder{Fore.CYAN}    ║")
    print(f"{Fore.CYAN}{'=' * 44}{Style.RESET_ALL}")
    print()


if __name__ == "__main__":
    print_banner()
    cli()
