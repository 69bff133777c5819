from flask import g
from isave.extensions import db


class RequestContext:
    """
    Everything a service call is allowed to know about the caller.

    Resources build one per request from the authenticated user and the
    database session; background jobs build one for the account they act on.
    Services never reach for ``flask.g`` themselves.
    """

    def __init__(self, user, session):
        self.user = user
        self.session = session

    @property
    def user_id(self):
        return self.user.id

    @classmethod
    def from_request(cls):
        return cls(user=g.current_user, session=db.session)

    @classmethod
    def for_user(cls, user):
        return cls(user=user, session=db.session)

    def __repr__(self):
        return f"<RequestContext user={self.user.id}>"
