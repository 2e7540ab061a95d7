#!/usr/bin/env python3
"""
Run the transformation locally against a Firehose event read from a file or stdin
"""

import argparse
import json
import sys

from botocore.exceptions import BotoCoreError, ClientError
from pydantic import ValidationError

from firehose_processor.handlers.lambda_handler import transform_event
from firehose_processor.services.errors import ProcessorError
from firehose_processor.utils.logger import setup_logging


def main(argv=None) -> int:
    """
    Main entry point for standalone execution
    """
    parser = argparse.ArgumentParser(description='Kinesis Data Firehose CloudWatch Logs processor')
    parser.add_argument('--input', type=argparse.FileType('r'), default=sys.stdin,
                        help='File containing the Firehose event JSON (default: stdin)')
    parser.add_argument('--output', type=argparse.FileType('w'), default=sys.stdout,
                        help='File to write the transformation response to (default: stdout)')
    parser.add_argument('--dry-run', action='store_true',
                        help='Do not republish oversized records, only report them')
    parser.add_argument('--log-level', default=None,
                        help='Log level (DEBUG, INFO, WARNING, ERROR)')

    args = parser.parse_args(argv)
    logger = setup_logging(args.log_level)

    input_data = args.input.read().strip()
    if not input_data:
        logger.error("No input data provided")
        return 1

    try:
        event = json.loads(input_data)
        response = transform_event(event, publish=not args.dry_run)
    except (json.JSONDecodeError, ValidationError) as e:
        logger.error(f"Invalid Firehose event: {str(e)}")
        return 1
    except ProcessorError as e:
        logger.error(f"Error processing event: {str(e)}")
        return 1
    except (ClientError, BotoCoreError) as e:
        logger.error(f"Error re-ingesting records: {str(e)}")
        return 1

    json.dump(response, args.output, indent=2)
    args.output.write('\n')
    args.output.flush()
    return 0


if __name__ == '__main__':
    sys.exit(main())
