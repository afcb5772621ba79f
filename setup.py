from setuptools import setup, find_packages

setup(name='genco',
      version='0.0.1',
      description='Generators written as async functions, resumed one yield at a time by the caller',
      classifiers=[
          "Programming Language :: Python :: 3",
          "License :: OSI Approved :: MIT License",
      ],
      keywords='generator coroutine async',
      license='MIT',
      python_requires='>=3.8',
      packages=find_packages(exclude=['genco.tests']),
      install_requires=[
          'outcome>=1.1',
      ],
      extras_require={
          'test': ['trio', 'pytest'],
      },
)
