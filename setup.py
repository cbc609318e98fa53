#!/usr/bin/env python

from setuptools import setup

setup(
    name="pySNN",
    version="0.1.0",
    packages=['pySNN', 'pySNN.common', 'pySNN.recording',
              'pySNN.standardmodels', 'pySNN.utility'],
    author="The pySNN team",
    description="Lifecycle, weight store and connection monitoring core for spiking neural network simulations",
    long_description=open("README.rst").read(),
    license="CeCILL http://www.cecill.info",
    keywords="computational neuroscience simulation spiking neural network plasticity",
    classifiers=['Development Status :: 3 - Alpha',
                 'Environment :: Console',
                 'Intended Audience :: Science/Research',
                 'License :: Other/Proprietary License',
                 'Natural Language :: English',
                 'Operating System :: OS Independent',
                 'Programming Language :: Python :: 3',
                 'Topic :: Scientific/Engineering'],
    python_requires='>=3.7',
    install_requires=['numpy>=1.17', 'lazyarray>=0.3.2', 'neo>=0.9.0',
                      'quantities>=0.12.1'],
    extras_require={
        'test': ['pytest'],
    },
)
