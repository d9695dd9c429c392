from routecheck.analysis.params import classify_params
from routecheck.domain.models import EndpointDefinition


def test_classify_params_excludes_path_and_splits_required():
    ep = EndpointDefinition(
        id="search",
        path="/items/{id}",
        method="GET",
        params=[
            {"name": "id", "kind": "path"},
            {"name": "q", "kind": "query"},
            {"name": "page", "kind": "query", "required": False},
        ],
    )
    sets = classify_params(ep)
    assert sets.required == {"q"}
    assert sets.all == {"q", "page"}


def test_classify_params_body_and_multipart_fields():
    ep = EndpointDefinition(
        id="upload",
        path="/upload",
        method="POST",
        content_type="multipart/form-data",
        params=[
            {"name": "file", "kind": "multipart"},
            {"name": "note", "kind": "body", "required": False},
        ],
    )
    sets = classify_params(ep)
    assert sets.required == {"file"}
    assert sets.all == {"file", "note"}


def test_classify_params_empty():
    ep = EndpointDefinition(id="list", path="/items", method="get")
    sets = classify_params(ep)
    assert sets.required == frozenset()
    assert sets.all == frozenset()
    assert ep.method == "GET"
