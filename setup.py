from setuptools import find_packages, setup

package_name = 'yarn_guardian'

setup(
    name=package_name,
    version='0.1.0',
    packages=find_packages(exclude=['test', 'test.*']),
    data_files=[
        ('share/' + package_name + '/config', ['config/config.yaml']),
    ],
    python_requires='>=3.11',
    install_requires=[
        'setuptools',
        'paho-mqtt>=2.0',
        'pyyaml',
        'pymodbus>=3.10',
        'SQLAlchemy>=2.0',
    ],
    zip_safe=True,
    maintainer='hansoo',
    maintainer_email='hansoo@todo.todo',
    description='Yarn break repair AGV/PLC coordinator',
    license='Apache-2.0',
    extras_require={
        'mysql': [
            'PyMySQL',
        ],
        'test': [
            'pytest',
        ],
    },
    entry_points={
        'console_scripts': [
            'yarn_guardian = yarn_guardian.presentation.main:main',
        ],
    },
)
