from setuptools import setup

install_requires = ['requests', 'pydantic', 'pydantic-settings']
version = '0.2.0'

setup(
    name='authhmac',
    author='Jason Raede',
    author_email='jason@dispatch.me',
    version=version,
    license='MIT',
    description='HMAC authentication for HTTP requests',
    packages=['authhmac'],
    platforms='ANY',
    python_requires='>=3.10',
    install_requires=install_requires,
    extras_require={
        'test': ['pytest'],
    },
)
