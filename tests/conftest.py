import sys
from pathlib import Path

# Make the packages importable when running pytest from a source checkout
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))
