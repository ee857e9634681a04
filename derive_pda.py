import os
import sys
import json
import logging
from dotenv import load_dotenv

from pda_core import MAX_BUMP, DerivationError, find_program_address
from bump_worker import find_program_address_parallel
from seed_codec import decode_address, encode_address, parse_seed_arg

# System program id, the base identifier used by the reference scripts
DEFAULT_PROGRAM_ID = '11111111111111111111111111111111'
DEFAULT_SEEDS = ['str:solwarrior', 'pubkey:BQuvWWJmjhS2X4jc6G9T2meEHdyzY6RsooTHLMABKeah']

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'


class UsageError(ValueError):
    pass


def load_config():
    load_dotenv()
    return {
        'program_id': os.getenv('PDA_PROGRAM_ID', DEFAULT_PROGRAM_ID).strip(),
        'workers': os.getenv('PDA_WORKERS', '1').strip(),
        'max_bump': os.getenv('PDA_MAX_BUMP', str(MAX_BUMP)).strip(),
        'log_level': os.getenv('LOG_LEVEL', 'INFO').strip().upper(),
    }


def parse_args(args, config):
    """Flags override the environment. Unknown tokens are ignored."""
    options = dict(config)
    seeds = []

    idx = 0
    while idx < len(args):
        flag = args[idx]
        if flag in ('--program-id', '--seed', '--max-bump', '--workers'):
            if idx + 1 >= len(args):
                raise UsageError(f"{flag} requires a value")
            value = args[idx + 1]
            if flag == '--seed':
                seeds.append(value)
            else:
                options[flag[2:].replace('-', '_')] = value
            idx += 2
        else:
            idx += 1

    options['seeds'] = seeds or list(DEFAULT_SEEDS)
    options['workers'] = _parse_int('workers', options['workers'], 1, None)
    options['max_bump'] = _parse_int('max bump', options['max_bump'], 0, MAX_BUMP)
    return options


def _parse_int(name, text, lowest, highest):
    try:
        value = int(text)
    except (TypeError, ValueError):
        raise UsageError(f"Invalid {name}: {text!r}")
    if value < lowest or (highest is not None and value > highest):
        raise UsageError(f"{name} out of range: {value}")
    return value


def run(options):
    program_id = decode_address(options['program_id'])
    seeds = [parse_seed_arg(s) for s in options['seeds']]

    logging.info(f"Deriving PDA for program {options['program_id']} with {len(seeds)} seeds")

    if options['workers'] > 1:
        result = find_program_address_parallel(seeds, program_id, options['workers'], options['max_bump'])
    else:
        result = find_program_address(seeds, program_id, options['max_bump'])

    return {
        'pda': encode_address(result.address),
        'bump': result.bump,
        'program_id': encode_address(program_id),
        'seeds': [s.hex() for s in seeds],
    }


def main(argv=None):
    config = load_config()
    logging.basicConfig(level=getattr(logging, config['log_level'], logging.INFO), format=LOG_FORMAT)

    try:
        options = parse_args(sys.argv[1:] if argv is None else argv, config)
    except UsageError as e:
        logging.error(f"Usage error: {e}")
        return 2

    try:
        output = run(options)
    except ValueError as e:
        # Includes InvalidAddressError
        logging.error(f"Invalid input: {e}")
        return 2
    except DerivationError as e:
        logging.error(f"Derivation failed: {e}")
        return 1

    print(json.dumps(output))
    logging.info(f"PDA: {output['pda']} Bump: {output['bump']}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
