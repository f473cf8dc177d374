from fastapi import Request, Response, status

# Every response leaves with these, errors included
CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


async def dispatch(request: Request, call_next):
    """
    Runs in front of routing for every request:
    number it, answer CORS preflight, make sure the schema is provisioned.
    """
    request.state.request_number = request.app.state.counter.increment()

    # Preflight never touches either database
    if request.method == "OPTIONS":
        return Response(status_code=status.HTTP_204_NO_CONTENT, headers=CORS_HEADERS)

    # Once per request, before any route can run a query. Never raises
    await request.app.state.provisioner.ensure_schema()

    response = await call_next(request)
    response.headers.update(CORS_HEADERS)
    return response
