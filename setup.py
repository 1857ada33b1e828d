"""
Setup diagrammar package.
"""

if __name__ == '__main__':  # pragma: no cover
    import pathlib
    from re import search, M
    from setuptools import setup, find_packages

    def get_version(filename="diagrammar/__init__.py",
                    pattern=r"^__version__ = ['\"]([^'\"]*)['\"]"):
        with open(filename, 'r') as file:
            MATCH = search(pattern, file.read(), M)
            if MATCH:
                return MATCH.group(1)
            else:
                raise RuntimeError("Unable to find version string.")

    VERSION = get_version()

    def get_reqs(filename):
        try:
            with pathlib.Path(filename).open() as file:
                return [line.strip() for line in file.readlines()]
        except FileNotFoundError:
            from warnings import warn
            warn("{} not found".format(filename))
            return []

    REQS = get_reqs("requirements.txt")
    TEST_REQS = get_reqs("test/requirements.txt")

    README = open("README.md", "r").read()

    setup(name='diagrammar',
          version=VERSION,
          package_dir={'diagrammar': 'diagrammar'},
          packages=find_packages(include=['diagrammar', 'diagrammar.*']),
          description='Layout and commutativity of diagrams in a category.',
          long_description=README,
          long_description_content_type="text/markdown",
          keywords='diagrams category-theory commutative-diagrams xypic',
          install_requires=REQS,
          tests_require=TEST_REQS,
          extras_require={'test': TEST_REQS},
          data_files=[('test', ['test/requirements.txt'])],
          python_requires='>=3.10',
          )
