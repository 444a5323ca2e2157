from protean.utils.query import Q

from storefront.accounts.address import Address
from storefront.accounts.user import User, UserStatus
from storefront.domain import storefront


@storefront.repository(part_of=User)
class UserRepository:
    def find_by_username(self, username):
        return self._dao.query.filter(username=username).all().first

    def active_page(self, keyword=None, page=0, size=20):
        """One zero-based page of ACTIVE users ordered by username.

        ``keyword`` matches username, first name or last name, ignoring case.
        """
        query = self._dao.query.filter(status=UserStatus.ACTIVE.value)
        if keyword:
            query = query.filter(
                Q(username__icontains=keyword) | Q(first_name__icontains=keyword) | Q(last_name__icontains=keyword)
            )
        return query.order_by("username").offset(page * size).limit(size).all()


@storefront.repository(part_of=Address)
class AddressRepository:
    def for_user(self, user_id):
        return self._dao.query.filter(user_id=user_id).order_by("created_at").limit(None).all().items
