import os
import sys

# Allow running the tests from a source checkout without installing the package
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))
