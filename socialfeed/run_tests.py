#!/usr/bin/env python3
"""
Test runner script for Social Feed API
"""
import sys
import os
import subprocess
from pathlib import Path

def run_tests():
    """Run tests with proper environment setup"""
    root = Path(__file__).parent.parent

    # Set environment variables for testing
    env = os.environ.copy()
    env['ENVIRONMENT'] = 'testing'
    env['TESTING'] = 'true'
    env['PYTHONPATH'] = str(root)

    # Run pytest with coverage
    cmd = [
        sys.executable, "-m", "pytest",
        "-v",  # Verbose output
        "--cov=socialfeed",  # Coverage for the package
        "--cov-report=term",  # Terminal coverage report
        "socialfeed/tests/"  # Test directory
    ]

    # Add custom arguments if provided
    if len(sys.argv) > 1:
        cmd.extend(sys.argv[1:])

    print(f"Running tests with command: {' '.join(cmd)}")

    result = subprocess.run(cmd, env=env, cwd=root)

    if result.returncode == 0:
        print("\n✅ All tests passed!")
    else:
        print("\n❌ Tests failed!")

    return result.returncode

if __name__ == "__main__":
    sys.exit(run_tests())
