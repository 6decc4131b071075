"""
Packaging script for PyPI.
"""
import setuptools

setuptools.setup(
	name='geo-lang',
	version='0.1.0',
	packages=['geo'],
	entry_points={
		'console_scripts': ["geo = geo.cmdline:main"],
	},
	license='MIT',
	description='A small interpreted expression language with closures, currying, and a pipe operator',
	long_description=open('README.md').read(),
	long_description_content_type="text/markdown",
	classifiers=[
		"Programming Language :: Python :: 3.9",
		"License :: OSI Approved :: MIT License",
		"Operating System :: OS Independent",
		"Development Status :: 3 - Alpha",
		"Intended Audience :: Developers",
		"Intended Audience :: Education",
		"Topic :: Software Development :: Interpreters",
		"Environment :: Console",
	],
	python_requires='>=3.9',
	install_requires=[
		"booze-tools>=0.6.2.1",
	],
)
