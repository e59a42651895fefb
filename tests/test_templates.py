import threading

import pytest

from reelpress.core.reel import ReelTemplate
from reelpress.core.templates import BUILTIN_TEMPLATES, QUOTE_TEMPLATE, TemplateRegistry
from reelpress.errors import UnknownTemplateError


def custom_template(template_id="campus-tour", **kwargs):
    defaults = dict(name="Campus Tour", description="Walk through campus photos", type="custom")
    defaults.update(kwargs)
    return ReelTemplate(id=template_id, **defaults)


def test_builtins():
    registry = TemplateRegistry()
    assert [t.id for t in registry.list()] == [
        "quote-template", "slideshow-template", "text-overlay-template", "animated-text-template",
    ]
    assert [t.type for t in registry.list()] == ["quote", "slideshow", "text_overlay", "animated_text"]
    assert len(registry) == 4


def test_get():
    registry = TemplateRegistry()
    assert registry.get(QUOTE_TEMPLATE).name == "Quote Reel"
    with pytest.raises(UnknownTemplateError) as excinfo:
        registry.get("nope")
    assert excinfo.value.template_id == "nope"


def test_register():
    registry = TemplateRegistry()
    template = custom_template()
    registry.register(template)

    assert "campus-tour" in registry
    assert registry.get("campus-tour") is template
    assert registry.list()[-1] is template


def test_duplicate_ids_are_rejected():
    registry = TemplateRegistry()
    with pytest.raises(ValueError):
        registry.register(custom_template(QUOTE_TEMPLATE))
    assert len(registry) == 4


def test_registries_are_independent():
    first, second = TemplateRegistry(), TemplateRegistry()
    first.register(custom_template())
    assert "campus-tour" not in second
    assert len(BUILTIN_TEMPLATES) == 4


def test_empty_registry():
    registry = TemplateRegistry(templates=[])
    assert registry.list() == ()
    assert QUOTE_TEMPLATE not in registry


def test_invalid_template_type():
    with pytest.raises(ValueError):
        custom_template(type="karaoke")


def test_concurrent_registration():
    registry = TemplateRegistry()
    errors = []

    def register(index):
        try:
            registry.register(custom_template(f"custom-{index}"))
            registry.register(custom_template("shared"))
        except ValueError as e:
            errors.append(e)

    threads = [threading.Thread(target=register, args=(i,)) for i in range(20)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    ids = [t.id for t in registry.list()]
    assert len(ids) == len(set(ids)) == 4 + 20 + 1
    assert len(errors) == 19
