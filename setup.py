from setuptools import setup, find_packages
import os

here = os.path.abspath(os.path.dirname(__file__))
README = open(os.path.join(here, 'README.md')).read()
NEWS = open(os.path.join(here, 'NEWS.txt')).read()

version = '0.0.1'

install_requires = [
    'mdis',    # dispatcher/walker/visitor used by the CLI commands
]

test_requires = [
    'pytest',  # runs the unittest modules beside the code
]

setup(
    name='genasmdb',
    version=version,
    description="asmjit/asmdb instruction-set data extractor and dumper",
    long_description=README + '\n\n' + NEWS,
    long_description_content_type='text/markdown',
    classifiers=[
        "Topic :: Software Development",
        "License :: OSI Approved :: BSD License",
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
    keywords='asmjit asmdb x86 instruction-set',
    license='BSD-3-Clause',
    packages=find_packages('src'),
    package_dir={'': 'src'},
    package_data={'genasmdb': ['asmdb/*.js']},
    include_package_data=True,
    zip_safe=False,
    python_requires='>=3.10',
    install_requires=install_requires,
    extras_require={
        'test': test_requires,
    },
    entry_points={
        'console_scripts': [
            'genasmdb=genasmdb.db:main',
        ]
    }
)
