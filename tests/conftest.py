"""
Pytest configuration and shared fixtures
"""

import pytest
import os
import tempfile
import shutil


@pytest.fixture
def temp_dir():
    """Create temporary directory for test files"""
    dirpath = tempfile.mkdtemp()
    yield dirpath
    shutil.rmtree(dirpath)


@pytest.fixture
def sample_text():
    """Sample text for testing"""
    return """The quick brown fox jumps over the lazy dog.
The dog was really lazy.
The fox was very quick and brown.
Quick brown foxes are amazing animals.
Lazy dogs sleep all day."""


@pytest.fixture
def write_input(temp_dir):
    """Factory writing text or bytes to a file in the temp directory"""
    def _write(content, name='input.txt'):
        filepath = os.path.join(temp_dir, name)
        data = content.encode('utf-8') if isinstance(content, str) else content
        with open(filepath, 'wb') as f:
            f.write(data)
        return filepath
    return _write


@pytest.fixture
def sample_input_file(write_input, sample_text):
    """Create a sample input file for testing"""
    return write_input(sample_text)
