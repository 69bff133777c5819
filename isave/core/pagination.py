from flask import g, request, url_for
from flask_restful import Resource
from isave.core.logger import logger

DEFAULT_PER_PAGE = 10
MAX_PER_PAGE = 100


def paginate(query, schema, endpoint=None, **params):
    """
    Page ``query`` using ``page``/``per_page`` from the query string.

    Returns ``count``, the dumped ``items`` and absolute ``next``/``previous``
    links when ``endpoint`` is given.
    """
    page = max(request.args.get("page", 1, type=int), 1)
    per_page = request.args.get("per_page", DEFAULT_PER_PAGE, type=int)
    per_page = min(max(per_page, 1), MAX_PER_PAGE)

    pagination = query.paginate(page=page, per_page=per_page, error_out=False)

    def link(target_page):
        if endpoint is None:
            return None
        return url_for(
            endpoint, page=target_page, per_page=per_page, _external=True, **params
        )

    return {
        "count": pagination.total,
        "next": link(page + 1) if pagination.has_next else None,
        "previous": link(page - 1) if pagination.has_prev else None,
        "items": schema.dump(pagination.items),
    }


class PaginatedListResource(Resource):
    """
    Admin listing of a whole table, newest first.

    Subclasses set ``model``, ``schema`` (a ``many=True`` schema) and the
    blueprint-qualified ``endpoint``; ``get_queryset`` narrows the rows.
    """

    model = None
    schema = None
    endpoint = None

    def get_queryset(self):
        return self.model.query.order_by(self.model.created_at.desc())

    def get(self):
        logger.info(
            f"Listing {self.model.__tablename__} for admin: {g.current_user.id}"
        )
        return paginate(self.get_queryset(), self.schema, self.endpoint), 200
