import json
import logging

import pytest

from jsonfs.nodes import build_table
from jsonfs.session import MountSession

MOUNT_TIME = 1500000000.0


@pytest.fixture
def example_doc():
    return {'a': 1, 'b': [True, None]}


@pytest.fixture
def nested_doc():
    return {
        'name': 'jsonfs',
        'version': 1.5,
        'tags': ['fuse', 'json'],
        'owner': {'login': 'octo', 'id': 42, 'site_admin': False},
        'empty': {},
        'none': [],
    }


@pytest.fixture
def make_session():
    def _make(doc):
        return MountSession(build_table(doc), source='test.json',
                            mount_time=MOUNT_TIME, uid=1000, gid=100)
    return _make


@pytest.fixture
def session(make_session, example_doc):
    return make_session(example_doc)


@pytest.fixture
def write_json(tmp_path):
    """Write a document (or raw text) to tmp_path and return its path."""
    def _write(doc, name='doc.json'):
        path = tmp_path / name
        text = doc if isinstance(doc, str) else json.dumps(doc)
        path.write_text(text, encoding='utf-8')
        return path
    return _write


@pytest.fixture(autouse=True)
def reset_jsonfs_logger():
    yield
    logger = logging.getLogger('jsonfs')
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
