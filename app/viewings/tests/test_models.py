"""
Tests for the Viewing model.
"""

import pytest

from viewings.models import Viewing, ViewingStatus
from viewings.tests.factories import ViewingFactory


class TestViewing:
    def test_defaults(self, viewing):
        assert viewing.status == ViewingStatus.PENDING
        assert Viewing._meta.db_table == "viewings"
        assert Viewing._meta.get_field("customer").column == "user_id"

    @pytest.mark.parametrize(
        "current,target,allowed",
        [
            (ViewingStatus.PENDING, ViewingStatus.APPROVED, True),
            (ViewingStatus.PENDING, ViewingStatus.REJECTED, True),
            (ViewingStatus.PENDING, ViewingStatus.COMPLETED, False),
            (ViewingStatus.APPROVED, ViewingStatus.COMPLETED, True),
            (ViewingStatus.APPROVED, ViewingStatus.REJECTED, True),
            (ViewingStatus.REJECTED, ViewingStatus.APPROVED, False),
            (ViewingStatus.COMPLETED, ViewingStatus.REJECTED, False),
        ],
    )
    def test_status_flow(self, db, current, target, allowed):
        viewing = ViewingFactory(status=current)

        assert viewing.can_move_to(target) is allowed
