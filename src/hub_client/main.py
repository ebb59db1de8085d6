import sys
import time
import logging

from .api import HubAPI
from .cli import parse_cmdline_args
from .config import ProxyInfo
from .utilities.output import format_duration
from .exceptions import (
    HubClientError,
    ApiError,
    NetworkError,
    ConfigurationError,
    AuthenticationError,
    ValidationError,
    ProjectNotFoundError,
    EntityNotFound,
    LinkNotFound,
    EntityResolutionError,
    TransformError,
    Cancelled,
)
from .handlers import (
    handle_notifications,
    handle_policy_status,
)

COMMAND_HANDLERS = {
    "notifications": handle_notifications,
    "policy-status": handle_policy_status,
}

SECRET_PARAMS = {"api_token", "password", "proxy_password"}


def main(argv=None) -> int:
    """
    Main function to parse arguments, set up logging, initialize the API client,
    and dispatch to the appropriate command handler.
    Returns an exit code (0 for success, non-zero for failure).
    """
    start_time = time.monotonic()
    exit_code = 1 # Default to failure
    logger = None # Initialize logger variable

    try:
        params = parse_cmdline_args(argv)

        # Setup logging
        log_level = getattr(logging, params.log.upper(), logging.INFO)
        logging.basicConfig(level=log_level,
                            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
                            handlers=[logging.FileHandler("hub-client-log.txt", mode='w')],
                            force=True) # Use force=True to allow reconfiguration if run multiple times

        # Add console handler separately to control its level independently
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
        console_handler.setLevel(log_level)
        logging.getLogger().addHandler(console_handler)

        logger = logging.getLogger("hub-client")

        # Print Configuration for this Run
        print("--- Hub Client Configuration ---")
        print(f"Command: {params.command}")
        for k, v in sorted(params.__dict__.items()):
            if k == 'command': continue
            display_val = v
            if k in SECRET_PARAMS and params.log.upper() != 'DEBUG':
                display_val = "****" if v else "Not Set"
            print(f"  {k:<30} = {display_val}")
        print("------------------------------------")

        proxy_info = ProxyInfo(
            host=params.proxy_host,
            port=params.proxy_port,
            username=params.proxy_username,
            password=params.proxy_password,
            ignored_proxy_hosts=params.proxy_ignored_hosts,
        ).build()

        hub = HubAPI(
            params.hub_url,
            api_token=params.api_token,
            username=params.username,
            password=params.password,
            proxy_info=proxy_info,
            timeout=params.timeout,
        )
        logger.info("Hub client initialized.")

        handler = COMMAND_HANDLERS.get(params.command)
        if handler:
            result = handler(hub, params) # Handlers raise exceptions on failure
            if params.command == 'policy-status':
                exit_code = 0 if result else 1
                if exit_code == 0:
                    print("\nHub Client finished successfully (not in violation).")
                else:
                    print("\nHub Client finished (project version IN VIOLATION).")
            else:
                exit_code = 0
                print("\nHub Client finished successfully.")
        else:
            print(f"Error: Unknown command '{params.command}'.")
            logger.error(f"Unknown command '{params.command}' encountered in main dispatch.")
            exit_code = 1

    # --- Unified Exception Handling ---
    except (AuthenticationError, ConfigurationError, ValidationError) as e:
        # Errors typically due to user input/setup, less need for full traceback in log
        print(f"\nDetailed Error Information:")
        print(f"Runtime Error: {e.message}")
        if logger: logger.error("%s: %s", type(e).__name__, e.message, exc_info=False)
        return 1
    except (ApiError, NetworkError, TransformError, EntityResolutionError, LinkNotFound) as e:
        # Errors during runtime interaction, traceback can be useful
        print(f"\nDetailed Error Information:")
        print(f"Runtime Error: {e.message}")
        if logger: logger.error("%s: %s", type(e).__name__, e.message, exc_info=True)
        return 1
    except (ProjectNotFoundError, EntityNotFound, Cancelled) as e:
        print(f"\nDetailed Error Information:")
        print(f"Runtime Error: {e.message}")
        if logger: logger.error("%s: %s", type(e).__name__, e.message, exc_info=False)
        return 1
    except HubClientError as e:
        print(f"\nDetailed Error Information:")
        print(f"Hub Client Error: {e.message}")
        if logger: logger.error("Unhandled HubClientError: %s", e.message, exc_info=True)
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted.")
        return 130
    except Exception as e:
        # Catch truly unexpected errors
        print(f"\nDetailed Error Information:")
        print(f"Unexpected Error: {e}")
        if logger: logger.critical("Unexpected error occurred", exc_info=True)
        return 1
    finally:
        duration_str = format_duration(time.monotonic() - start_time)
        print(f"\nTotal Execution Time: {duration_str}")
        if logger: logger.info("Total execution time: %s", duration_str)

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
