import pytest

from dataclass_getopt import OptionTypeMap


@pytest.fixture(autouse=True)
def restore_option_type_map():
    """Undo any registrations a test makes in the process-wide type map."""
    saved = dict(OptionTypeMap._option_type_map)
    yield
    OptionTypeMap._option_type_map.clear()
    OptionTypeMap._option_type_map.update(saved)
