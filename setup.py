"""
Packaging script for PyPI.
"""
import setuptools

setuptools.setup(
	name='switch-expr',
	version='0.1.0',
	packages=['switch_expr'],
	entry_points={
		'console_scripts': ["switch-expr = switch_expr.cmdline:main"],
	},
	license='MIT',
	description='Expands fluent Switch(...).case(...).default(...)() chains into plain conditional expressions',
	long_description=open('README.md').read(),
	long_description_content_type="text/markdown",
	classifiers=[
		"Programming Language :: Python :: 3.9",
		"License :: OSI Approved :: MIT License",
		"Operating System :: OS Independent",
		"Development Status :: 3 - Alpha",
		"Intended Audience :: Developers",
		"Topic :: Software Development :: Code Generators",
		"Topic :: Software Development :: Pre-processors",
		"Environment :: Console",
    ],
	python_requires='>=3.9',
	install_requires=[
		"booze-tools>=0.6.2.1",
	]
)
