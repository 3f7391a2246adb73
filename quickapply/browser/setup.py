"""
Session setup helper
Opens a platform's persistent browser profile and waits for you to log in.
Press Ctrl+C when done to save the session.
"""

import argparse
import sys

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright

from quickapply.browser.session import launch_context, profile_dir
from quickapply.config import PLATFORM_NAMES, load_settings
from quickapply.errors import ConfigError
from quickapply.platforms.registry import ADAPTERS


def capture_login(platform, browser_data_dir):
    adapter = ADAPTERS[platform]
    print("=" * 50)
    print(f"Log into {platform} in the browser that opens.")
    print("Visit a job listing to verify access, then press Ctrl+C here.")
    print("=" * 50)
    with sync_playwright() as p:
        context, page = launch_context(p, profile_dir(browser_data_dir, platform), headless=False)
        try:
            page.goto(adapter.login_check_url)
            page.wait_for_timeout(1_000_000_000)
        except KeyboardInterrupt:
            pass
        finally:
            context.close()
    print(f"\n✓ {platform} session saved.\n")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Save a logged-in browser session per platform")
    parser.add_argument("--platform", default="all", choices=list(PLATFORM_NAMES) + ["all"])
    parser.add_argument("--config", help="Path to config.yaml")
    args = parser.parse_args(argv)

    try:
        settings = load_settings(args.config)
    except ConfigError as e:
        print(f"✗ {e}")
        return 2

    platforms = PLATFORM_NAMES if args.platform == "all" else (args.platform,)
    try:
        for platform in platforms:
            capture_login(platform, settings.browser_data_dir)
    except KeyboardInterrupt:
        print("\nAborted.")
        return 1
    except PlaywrightError as e:
        print(f"\n✗ Error: {e}\n")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
