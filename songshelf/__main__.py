import os
import sys

from songshelf.config import load_config
from songshelf.exceptions import ConfigurationError
from songshelf.logging_config import setup_logging


def main():
    try:
        config = load_config(os.environ.get('SONGSHELF_CONFIG', 'songshelf.yaml'))
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(2)

    logger = setup_logging(config.log_level, config.log_file)

    from songshelf.app import create_app

    app = create_app(config)
    logger.info(f"Server is running on port {config.port}")
    app.run(host=config.host, port=config.port)


if __name__ == '__main__':
    main()
