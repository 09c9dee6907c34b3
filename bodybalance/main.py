"""
bodybalance: A gamified personal health tracker

Entry point that prints a dashboard summary for the stored profile.
"""

import logging

from bodybalance.cli import display_challenges, display_level, display_streaks
from bodybalance.config import LOG_LEVEL, validate_config
from bodybalance.errors import StorageUnavailable
from bodybalance.session import ProfileSession

logger = logging.getLogger(__name__)


def main():
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
    )

    print("bodybalance - Track your health, level up!")
    print("-" * 50)

    # Validate configuration
    try:
        validate_config()
    except ValueError as e:
        print(f"\nConfiguration Error:\n{e}")
        return 1

    try:
        session = ProfileSession()
        session.check_achievements()
        dashboard = session.dashboard()
    except StorageUnavailable as e:
        logger.error("Storage unavailable: %s", e)
        print(f"\nError: {e}")
        return 1

    if dashboard is None:
        print("No profile yet. Create one with POST /api/profile to get started.")
        return 0

    print(f"\nHello, {dashboard['name']}!\n")
    display_level(dashboard["xp"], dashboard["language"])
    display_streaks(dashboard["streaks"])
    display_challenges(dashboard["challenges"])

    recent = dashboard["achievements"][:6]
    if recent:
        print("🏆 Recent Achievements:")
        for achievement in recent:
            print(f"   {achievement['date_earned']}  {achievement['title']} (+{achievement['xp_reward']} XP)")
        print()

    return 0


if __name__ == "__main__":
    exit(main())
