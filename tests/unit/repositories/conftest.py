"""Shared pytest fixtures for repository tests."""

import pytest
from unittest.mock import Mock


@pytest.fixture
def execute_result(mock_async_session):
    """The Result object returned by ``mock_async_session.execute``."""
    return mock_async_session.execute.return_value


@pytest.fixture
def scalars_returning(execute_result):
    """Make ``result.scalars().all()`` return the given rows."""

    def _set(rows):
        execute_result.scalars = Mock(return_value=Mock(all=Mock(return_value=rows)))

    return _set
