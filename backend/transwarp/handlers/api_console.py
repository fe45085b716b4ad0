"""API Console — manage-area page listing the documented /api/ routes."""

from fastapi import Depends, Request

from transwarp.api.context import RequestContext, request_context
from transwarp.core.route_spec import RouteSpec, Verb


async def api_console(
    request: Request, ctx: RequestContext = Depends(request_context),
):
    docs = request.app.state.api_docs
    return ctx.render("manage/api_console.html", {"modules": docs.by_module()})


def routes():
    return {RouteSpec(Verb.GET, "/manage/api/"): api_console}
