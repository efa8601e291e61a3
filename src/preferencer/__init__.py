"""preferencer: typed preference accessor classes, generated.

Describe preferences once, as a PreferenceClass model or a TOML file, and
generate a class that reads them from a key-value store, writes them
directly or in transactions, and hands out one instance per process:

    from preferencer.gen import PreferenceGenerator, render_module
    from preferencer.loader import load_model

    classes = load_model(Path("preferences.toml"))
    report = PreferenceGenerator().generate_all(classes)
    source = render_module(report.types)
"""

__version__ = "0.1.0"
