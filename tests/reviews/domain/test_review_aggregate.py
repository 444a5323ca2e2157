import pytest
from protean.exceptions import ValidationError

from storefront.reviews.events import ReviewEdited, ReviewSubmitted
from storefront.reviews.review import Review
from storefront.shared.errors import ForbiddenError


def _make_review(rating=4):
    return Review.submit(user_id="user-001", product_id="prod-001", rating=rating, comment="Solid")


class TestReview:
    def test_submit(self):
        review = _make_review()
        assert review.rating == 4
        assert [e for e in review._events if isinstance(e, ReviewSubmitted)]

    @pytest.mark.parametrize("rating", [0, 6])
    def test_rating_range(self, rating):
        with pytest.raises(ValidationError):
            _make_review(rating=rating)

    def test_edit(self):
        review = _make_review()
        review.edit(rating=5)
        assert review.rating == 5
        assert review.comment == "Solid"
        assert [e for e in review._events if isinstance(e, ReviewEdited)]

    def test_only_author_passes(self):
        review = _make_review()
        review.assert_author("user-001")
        with pytest.raises(ForbiddenError):
            review.assert_author("user-002")
