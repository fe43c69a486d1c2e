import logging


def logger(app, level=logging.DEBUG):

    logger = logging.getLogger('finalhandler')
    logger.setLevel(level)
    handler = logging.StreamHandler()

    @app.listen('request')
    async def log_request(request, response):
        logger.info('%s %s', request.method, (request.url or b'').decode())

    @app.listen('errorDispatch')
    async def log_dispatch(event):
        logger.info('Final handler answered %s %s',
                    event['method'], event['url'])

    @app.listen('startup')
    async def startup():
        logger.addHandler(handler)

    @app.listen('shutdown')
    async def shutdown():
        logger.removeHandler(handler)

    return app
