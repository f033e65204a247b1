import os

from lambda_proxy_utils import LambdaProxyError, Response, request, response_for_error


def _widget(req):
    widget_id = req.params.get("id")
    if not widget_id:
        raise LambdaProxyError("app.not_found", "widget not found")
    return {"id": widget_id, "verbose": req.get_query_param("verbose") is True}


def handler(event, _context):
    cors = os.getenv("WIDGETS_CORS", "true") == "true"
    req = request(event)
    try:
        widget = _widget(req)
    except LambdaProxyError as exc:
        return response_for_error(exc, cors=cors)

    res = Response(cors=cors)
    if req.accepts("json", "html") == "html":
        return res.type("html").send(f"<h1>widget {widget['id']}</h1>")

    res.cookie("last_widget", widget["id"], {"http_only": True, "max_age": 3600 * 1000})
    return res.json(widget)
