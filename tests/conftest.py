import pytest

from mock_data import TODAY, build_exams, build_predictions, build_users


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def users():
    return build_users()


@pytest.fixture
def exams():
    return build_exams()


@pytest.fixture
def exams_by_id(exams):
    return {exam.id: exam for exam in exams}


@pytest.fixture
def predictions():
    return build_predictions()
