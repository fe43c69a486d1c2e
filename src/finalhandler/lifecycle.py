from functools import wraps


def handler_events(func):
    @wraps(func)
    async def dispatch(app, request, response, *args, **kwargs):
        await app.notify('request', request, response)
        if not response.finished:
            # A request hook may answer by itself.
            await func(app, request, response, *args, **kwargs)
        await app.notify('response', request, response)
    return dispatch
