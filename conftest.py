import sys
import pytest
from pathlib import Path

# Add the src directory to Python path for imports
root_dir = Path(__file__).parent
src_dir = root_dir / "src"
sys.path.insert(0, str(src_dir))
sys.path.insert(0, str(root_dir))


def pytest_configure(config):
    """
    Register custom markers
    """
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
