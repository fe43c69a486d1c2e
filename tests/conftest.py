import inspect
import logging

import pytest

from curio import Kernel
from curio.debug import longblock, logcrash


logging.basicConfig(level=logging.DEBUG)


MARKER = 'curio'


def pytest_configure(config):
    config.addinivalue_line(
        'markers', 'curio: run the coroutine test in a curio kernel')


@pytest.hookimpl(tryfirst=True)
def pytest_pyfunc_call(pyfuncitem):
    """Run tests marked `curio` in a Kernel
    """
    if MARKER in pyfuncitem.keywords and \
       inspect.iscoroutinefunction(pyfuncitem.obj):
        funcargs = pyfuncitem.funcargs
        testargs = {arg: funcargs[arg]
                    for arg in pyfuncitem._fixtureinfo.argnames}
        kernel = funcargs.get('kernel')
        if kernel is None:
            with Kernel() as kernel:
                kernel.run(pyfuncitem.obj(**testargs))
        else:
            kernel.run(pyfuncitem.obj(**testargs))
        return True


def pytest_runtest_setup(item):
    if MARKER in item.keywords and 'kernel' not in item.fixturenames:
        # inject a kernel fixture for all async tests
        item.fixturenames.append('kernel')


@pytest.fixture
def kernel(request):
    k = Kernel(debug=[longblock, logcrash])
    request.addfinalizer(lambda: k.run(shutdown=True))
    return k
