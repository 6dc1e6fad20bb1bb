from flask import request


def get_json_body():
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def get_page_args(default_limit=10):
    page = request.args.get('page', 1, type=int)
    limit = request.args.get('limit', default_limit, type=int)
    return page, limit
