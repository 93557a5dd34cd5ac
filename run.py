import argparse
import logging
import sys

from soundboard.database import open_database
from soundboard.environment import Environment
from soundboard.errors import StartupError
from soundboard.logger import setup_logging

logger = logging.getLogger("soundboard")


def run_bot(env: Environment) -> int:
    from soundboard.core import Bot

    if not env.bot_token:
        logger.error("Error: DISCORD_BOT_TOKEN not found.")
        return 1

    pool = open_database(env.db_path, pool_size=env.db_pool_size)
    bot = Bot(env, pool)
    logger.info("Running client...")
    bot.run_bot()
    return 1 if bot.startup_failed else 0


def run_scan(env: Environment, prune: bool = False) -> int:
    from soundboard.repositories.audio import AudioRepository
    from soundboard.services.catalog import CatalogScanner

    pool = open_database(env.db_path, pool_size=1)
    try:
        audio_repo = AudioRepository(pool)
        audio_repo.create_table()
        result = CatalogScanner(audio_repo, env.sounds_dir).scan(prune=prune)
    finally:
        pool.close()
    print(f"Scanned {env.sounds_dir}: {result}")
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Run soundboard components")
    parser.add_argument('component', choices=['bot', 'scan'], help="Component to run")
    parser.add_argument('--prune', action='store_true', help="With 'scan': drop rows whose file is gone")
    parser.add_argument('--env-file', default=None, help="Path to a .env file")

    args = parser.parse_args(argv)

    env = Environment(args.env_file)
    setup_logging(env.log_level, env.logs_dir)

    try:
        if args.component == 'bot':
            return run_bot(env)
        return run_scan(env, prune=args.prune)
    except StartupError as e:
        logger.critical(f"Startup failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
