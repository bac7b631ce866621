from setuptools import setup, find_packages


setup(
    name="wa-relay",
    version="1.0.0",
    description="Web form and backend relay for the GREEN-API WhatsApp gateway",
    packages=find_packages(where=".", include=["wa_relay*"]),
    package_data={
        "wa_relay": ["templates/*.html", "static/*"],
    },
    include_package_data=True,
    install_requires=[
        "flask>=3.1.2",
        "flask-cors>=6.0.1",
        "requests>=2.32.5",
        "urllib3>=2.3",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
            "requests-mock>=1.12",
        ],
    },
    python_requires=">=3.11",
)
