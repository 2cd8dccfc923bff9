# handlers/dashboard.py
from aiohttp import web

from app.errors import StoreUnavailable
from app.stores.ledger import SqlLedger

LEDGER_KEY = web.AppKey("ledger", SqlLedger)

routes = web.RouteTableDef()


@routes.get("/api/users/{telegram_id}/points")
async def get_points(request: web.Request) -> web.Response:
    try:
        telegram_id = int(request.match_info["telegram_id"])
    except ValueError:
        return web.json_response({"error": "telegram_id must be an integer"}, status=400)

    try:
        points = await request.app[LEDGER_KEY].lookup(telegram_id)
    except StoreUnavailable:
        return web.json_response({"error": "database unavailable"}, status=503)

    if points is None:
        return web.json_response({"error": "user not found"}, status=404)
    return web.json_response({"telegram_id": telegram_id, "points": points})


def setup_dashboard(app: web.Application, ledger: SqlLedger):
    app[LEDGER_KEY] = ledger
    app.add_routes(routes)
