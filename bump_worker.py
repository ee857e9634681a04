import logging
import multiprocessing
import queue

from pda_core import (
    MAX_BUMP,
    DerivationError,
    DerivationResult,
    ExhaustedError,
    as_address,
    check_bump,
    search_bumps,
    validate_seeds,
)

# Seconds the parent waits for each slice before giving up
WORKER_TIMEOUT = 60


class WorkerError(DerivationError):
    pass


def split_bump_range(max_bump, parts):
    """
    Splits [0, max_bump] into contiguous slices ordered from the highest bumps
    down. Returns a list of (high, low) pairs, both inclusive.
    """
    total = max_bump + 1
    parts = max(1, min(parts, total))
    size, extra = divmod(total, parts)

    slices = []
    high = max_bump
    for i in range(parts):
        width = size + (1 if i < extra else 0)
        low = high - width + 1
        slices.append((high, low))
        high = low - 1
    return slices


def scan_slice(joined_seeds, program_raw, high, low, result_queue):
    """
    Worker function to run in a separate process.
    Reports the first off-curve bump in its slice, or None if every bump
    in the slice hashed onto the curve.
    """
    try:
        result = search_bumps(joined_seeds, program_raw, high, low)
        if result is None:
            result_queue.put({'high': high, 'bump': None, 'address': None})
        else:
            result_queue.put({'high': high, 'bump': result.bump, 'address': result.address})
    except Exception as e:
        logging.exception(f"Worker for bumps {high}..{low} failed")
        result_queue.put({'high': high, 'error': str(e)})


def find_program_address_parallel(seeds, program_id, processes=None, max_bump=MAX_BUMP):
    """
    Same result as pda_core.find_program_address, with the bump range
    partitioned across processes. The highest successful bump wins no matter
    which process reports first.
    """
    check_bump(max_bump)
    joined = b"".join(validate_seeds(seeds))
    program_raw = as_address(program_id)

    if processes is None:
        processes = multiprocessing.cpu_count()
    slices = split_bump_range(max_bump, processes)

    logging.info(f"Searching bumps {max_bump}..0 across {len(slices)} processes")

    result_queue = multiprocessing.Queue()
    workers = []
    for high, low in slices:
        p = multiprocessing.Process(
            target=scan_slice,
            args=(joined, program_raw, high, low, result_queue)
        )
        p.start()
        workers.append(p)

    reports = []
    try:
        for _ in workers:
            reports.append(result_queue.get(timeout=WORKER_TIMEOUT))
    except queue.Empty as e:
        raise WorkerError(f"Timed out after {WORKER_TIMEOUT}s waiting for bump workers") from e
    finally:
        for p in workers:
            p.join(timeout=5)
            if p.is_alive():
                p.terminate()
                p.join()

    failed = [r for r in reports if 'error' in r]
    if failed:
        raise WorkerError(f"Bump worker for slice starting at {failed[0]['high']} failed: {failed[0]['error']}")

    found = [r for r in reports if r['bump'] is not None]
    if not found:
        raise ExhaustedError(max_bump)

    best = max(found, key=lambda r: r['bump'])
    logging.debug(f"Bump workers reported {len(found)} candidate slices, best bump {best['bump']}")
    return DerivationResult(best['address'], best['bump'])
