from os import path
from setuptools import setup, find_packages


def read(filename):
    with open(path.join(path.dirname(__file__), filename)) as f:
        return f.read()


install_requires = [
    "autoroutes >= 0.3.5",
    "httptools >= 0.5.0",
    "curio >= 1.4",
    ]

tests_require = [
    "pytest >= 7.0",
    ]

setup(name='finalhandler',
      version='0.1.0',
      description="Final request handler for curio HTTP servers",
      long_description="%s\n\n%s" % (
          read('README.rst'), read(path.join('docs', 'HISTORY.rst'))),
      keywords="Curio HTTP 404 error handler",
      author="",
      author_email="",
      license="BSD",
      packages=find_packages('src', exclude=['ez_setup']),
      package_dir={'': 'src'},
      include_package_data=True,
      zip_safe=False,
      python_requires='>=3.7',
      install_requires=install_requires,
      extras_require={'test': tests_require},
      entry_points={
          'pytest11': ['finalhandler=finalhandler.testing'],
      }
      )
