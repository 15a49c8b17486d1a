from setuptools import setup

setup(name='deunicode',
      version='0.1',
      description='Transliterates arbitrary Unicode text to ASCII using a precomputed codepoint table.',
      url='https://github.com/errantlinguist/deunicode',
      author='Todd Shore',
      author_email='errantlinguist+github@gmail.com',
      license='Apache License, Version 2.0',
      packages=['deunicode'],
      package_data={'deunicode': ['data/*']},
      python_requires='>=3.7',
      install_requires=['emoji>=2.0', 'python-magic', 'unidecode>=1.3'],
      extras_require={'test': ['pytest']},
      scripts=['asciify_docs.py', 'build_mapping_tables.py'])
