"""Member aggregate: a back-office staff account."""

from protean.fields import DateTime, String

from purchasing.domain import purchasing


@purchasing.aggregate
class Member:
    name = String(required=True, max_length=255)
    login_id = String(required=True, max_length=255)
    login_date = DateTime()

    def record_login(self, at):
        self.login_date = at
