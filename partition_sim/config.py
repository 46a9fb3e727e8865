import json
from pathlib import Path

from .errors import ConfigurationError

# --- CONFIGURATION PARAMETERS ---
TOTAL_MEMORY = 1024       # units in the linear address space
MAX_PROCESSES = 100       # process table / admission queue bound
MIN_PROCESSES = 1         # smallest scenario the core accepts
PROMPT_MIN_PROCESSES = 5  # threshold enforced by the interactive prompt

# Keys accepted for a process record given as a mapping
RECORD_KEYS = ('arrival', 'service', 'size')


# ----------------------
# Record validation
# ----------------------
def _as_triple(index, record):
    """Normalise one process record into an (arrival, service, size) tuple."""
    if isinstance(record, dict):
        missing = [k for k in RECORD_KEYS if k not in record]
        if missing:
            raise ConfigurationError(f"Process {index}: missing field(s) {', '.join(missing)}")
        values = tuple(record[k] for k in RECORD_KEYS)
    else:
        try:
            values = tuple(record)
        except TypeError:
            raise ConfigurationError(f"Process {index}: expected (arrival, service, size), got {record!r}")
        if len(values) != 3:
            raise ConfigurationError(f"Process {index}: expected 3 values, got {len(values)}")

    for name, value in zip(RECORD_KEYS, values):
        # bool is an int subclass but never a sensible time or size
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigurationError(f"Process {index}: {name} must be an integer, got {value!r}")
        if value < 0:
            raise ConfigurationError(f"Process {index}: {name} must be non-negative, got {value}")
    return values


def _check_setting(name, value, minimum):
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")
    if value < minimum:
        raise ConfigurationError(f"{name} must be at least {minimum}, got {value}")


def validate_processes(records, total_memory=TOTAL_MEMORY, max_processes=MAX_PROCESSES,
                       min_processes=MIN_PROCESSES):
    """
    Check a list of process records against the memory and table bounds.
    Returns a list of (arrival, service, size) tuples in id order (id = index + 1).
    Raises ConfigurationError on the first problem found; nothing is clamped.
    """
    _check_setting('total_memory', total_memory, minimum=1)
    _check_setting('max_processes', max_processes, minimum=1)
    _check_setting('min_processes', min_processes, minimum=0)
    if not isinstance(records, (list, tuple)):
        raise ConfigurationError(f"processes must be a list, got {type(records).__name__}")
    records = list(records)
    count = len(records)
    if count < min_processes:
        raise ConfigurationError(f"At least {min_processes} process(es) required, got {count}")
    if count > max_processes:
        raise ConfigurationError(f"At most {max_processes} processes supported, got {count}")

    triples = []
    for i, record in enumerate(records, start=1):
        arrival, service, size = _as_triple(i, record)
        if size == 0 or size > total_memory:
            raise ConfigurationError(
                f"Process {i}: size must be in (0, {total_memory}], got {size}")
        triples.append((arrival, service, size))
    return triples


# ----------------------
# Scenario loading
# ----------------------
def extract_scenario(scenario):
    """
    Read a scenario mapping into the settings the simulation needs.
    Missing keys fall back to the module constants.
    """
    if not isinstance(scenario, dict):
        raise ConfigurationError(f"Scenario must be a mapping, got {type(scenario).__name__}")
    settings = {
        'total_memory': scenario.get('total_memory', TOTAL_MEMORY),
        'max_processes': scenario.get('max_processes', MAX_PROCESSES),
        'min_processes': scenario.get('min_processes', MIN_PROCESSES),
    }
    settings['processes'] = validate_processes(scenario.get('processes', []), **settings)
    return settings


def load_scenario_file(path):
    """Load and validate a JSON scenario file."""
    try:
        scenario = json.loads(Path(path).read_text())
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"{path}: not valid JSON ({exc})")
    return extract_scenario(scenario)


def prompt_scenario(read=input, min_processes=PROMPT_MIN_PROCESSES,
                    total_memory=TOTAL_MEMORY, max_processes=MAX_PROCESSES):
    """
    Ask for the process table interactively, the way the console program did.
    `read` is injectable so the prompt can be driven from tests.
    """
    def read_int(prompt):
        text = read(prompt).strip()
        try:
            return int(text)
        except ValueError:
            raise ConfigurationError(f"Expected an integer, got {text!r}")

    count = read_int(f"Enter the total number of processes (minimum {min_processes}): ")
    while count < min_processes:
        print(f"At least {min_processes} processes required.")
        count = read_int(f"Enter the total number of processes (minimum {min_processes}): ")

    records = []
    for pid in range(1, count + 1):
        print(f"\nEnter details for Process {pid}:")
        arrival = read_int("Arrival Time: ")
        service = read_int("Execution Time: ")
        size = read_int("Size (in units): ")
        records.append((arrival, service, size))

    return extract_scenario({
        'total_memory': total_memory,
        'max_processes': max_processes,
        'min_processes': min_processes,
        'processes': records,
    })
