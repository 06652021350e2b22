import pytest
from django.contrib.auth import get_user_model

from apps.spaces.models import Floor, Space


@pytest.fixture
def floor(db):
    return Floor.objects.create(name="Level 1")


@pytest.fixture
def room(floor):
    return Space.objects.create(floor=floor, name="R1")


@pytest.fixture
def other_room(floor):
    return Space.objects.create(floor=floor, name="R2")


@pytest.fixture
def closed_room(floor):
    return Space.objects.create(floor=floor, name="R3", is_active=False)


@pytest.fixture
def alice(db):
    return get_user_model().objects.create_user(username="alice", password="pass")


@pytest.fixture
def bob(db):
    return get_user_model().objects.create_user(username="bob", password="pass")
