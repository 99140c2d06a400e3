import pytest

from accounts.models import User
from catalog.models import Completion, Problem, Topic

PROBLEMS = [
    ("Two Sum", "two-sum", "EASY"),
    ("Group Anagrams", "group-anagrams", "MEDIUM"),
    ("Number of Islands", "number-of-islands", "MEDIUM"),
]


@pytest.fixture
def utc_zone(settings):
    settings.TIME_ZONE = "UTC"


@pytest.fixture
def user(db):
    return User.objects.create_user(username="learner")


@pytest.fixture
def other_user(db):
    return User.objects.create_user(username="someone-else")


@pytest.fixture
def topic(db):
    return Topic.objects.create(name="Arrays & Hashing", slug="arrays-hashing")


@pytest.fixture
def problems(topic):
    return [
        Problem.objects.create(name=name, slug=slug, difficulty=difficulty, topic=topic)
        for name, slug, difficulty in PROBLEMS
    ]


@pytest.fixture
def completed(user, problems):
    for problem in problems:
        Completion.objects.create(user_id=user.id, problem=problem)
    return problems
