"""
pipeline-test: run the pipeline test program in its compose service.

Every argument is forwarded verbatim to the program inside the container.
Harness behaviour is controlled through the environment:

    PIPELINE_TEST_CONFIG     TOML file merged over the built-in defaults
    PIPELINE_TEST_TARGET     target to run (default: pipeline-test)
    PIPELINE_TEST_COMPOSE    compose launcher, e.g. "docker compose"
    PIPELINE_TEST_DRY_RUN    print the command instead of running it
    PIPELINE_TEST_VERBOSE    debug logging on stderr
    PIPELINE_TEST_DEBUG      log verbosity (0 warnings, 1 info, 2 debug)
"""
import sys

from pipeline_harness.command import build_command, format_command
from pipeline_harness.config import load_config
from pipeline_harness.exceptions import ConfigurationError, UserIdentityError, ToolNotFoundError, LaunchError
from pipeline_harness.identity import user_spec
from pipeline_harness.log import level_for, setup_logging
from pipeline_harness.run import run_forwarded

EXIT_USAGE = 2
EXIT_CANNOT_EXECUTE = 126
EXIT_NOT_FOUND = 127
EXIT_INTERRUPTED = 130


def main(argv=None) -> int:
    args = sys.argv[1:] if argv is None else list(argv)

    logger = setup_logging()
    try:
        config = load_config()
        logger = setup_logging(level_for(config.debug_level))

        cmd = build_command(config.target, user_spec(), args, compose=config.compose)
    except (ConfigurationError, UserIdentityError) as e:
        logger.error("%s", e)
        return EXIT_USAGE

    logger.debug("target %s: %s", config.target.name, format_command(cmd))

    if config.dry_run:
        print(format_command(cmd))
        return 0

    try:
        return run_forwarded(cmd, cwd=config.target.workdir)
    except ToolNotFoundError as e:
        logger.error("%s", e)
        return EXIT_NOT_FOUND
    except LaunchError as e:
        logger.error("%s", e)
        return EXIT_CANNOT_EXECUTE
    except KeyboardInterrupt:
        # only reached when Ctrl-C lands before the child is running
        return EXIT_INTERRUPTED


if __name__ == '__main__':
    sys.exit(main())
