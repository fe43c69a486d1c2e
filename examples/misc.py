"""
Examples of usages.
"""
import curio
from finalhandler import App, HTTPError, HTTPStatus
from finalhandler.extensions import logger


def report(error, request, response):
    print('Failed to answer {} {}: {!r}'.format(
        request.method, request.path, error))


bauble = logger(App(onerror=report))


@bauble.route('/')
async def hello(request, response):
    response.set_header('Content-Type', 'text/plain; charset=utf-8')
    await response.end(b'Hello World !')


@bauble.route('/ignore', methods=['POST'])
async def ignore(request, response):
    # A post where we ignore the body: it is drained by the final handler.
    raise HTTPError(HTTPStatus.FORBIDDEN, 'Nobody reads this.')


@bauble.route('/read', methods=['POST'])
async def read(request, response):
    body = await request.read()
    await response.end('Read {} bytes.'.format(len(body)))


@bauble.route('/slow')
async def slow(request, response):
    await response.write(b'Started... ')
    await curio.sleep(1)
    # Too late for an error document: the response is only ended.
    raise RuntimeError('Gave up.')


@bauble.route('/rewrite/{rest}')
async def rewrite(request, response, rest):
    # Not ending the response falls through to a 404.
    request.original_url = request.url
    request.url = '/{}'.format(rest).encode()


bauble.start()
