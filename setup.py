from setuptools import find_packages, setup

package_name = 'pca9685_driver'

setup(
    name=package_name,
    version='0.0.0',
    packages=find_packages(exclude=['test']),
    data_files=[
        ('share/ament_index/resource_index/packages',
            ['resource/' + package_name]),
        ('share/' + package_name, ['package.xml']),
    ],
    install_requires=['setuptools', 'smbus2'],
    extras_require={
        'test': ['pytest'],
    },
    zip_safe=True,
    maintainer='mj',
    maintainer_email='marcus.j.hsieh@gmail.com',
    description='Register-level driver for the PCA9685 16-channel 12-bit PWM controller',
    license='Apache-2.0',
    # tests_require=['pytest'],
)
