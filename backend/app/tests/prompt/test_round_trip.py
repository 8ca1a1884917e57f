from typing import Any

from app.prompt import (
    BranchInfo,
    CompanyInfo,
    ExampleItem,
    PromptData,
    RuleItem,
    parse_prompt,
    serialize_prompt,
)


def _without_ids(value: Any) -> Any:
    if isinstance(value, dict):
        return {key: _without_ids(item) for key, item in value.items() if key != "id"}
    if isinstance(value, list):
        return [_without_ids(item) for item in value]
    return value


def _canonical_prompt() -> PromptData:
    return PromptData(
        role="Asistente virtual de Acme",
        purpose="Responder consultas de clientes por WhatsApp",
        core_rules=[RuleItem(texto="Sé cordial."), RuleItem(texto="No inventes precios.")],
        behavior_rules=[RuleItem(texto="Deriva reclamos a un humano.")],
        negative_prompt="No hables de política.\n  - tampoco de religión",
        tools="consultar_stock",
        company=CompanyInfo(
            acerca="Acme vende herramientas desde 1990.",
            servicios=["Venta mayorista", "Reparaciones"],
        ),
        branches=[
            BranchInfo(
                tag="casa_central",
                etiqueta="Casa Central",
                responsable="Ana Pérez",
                telefonos=["+54 11 1111", "+54 11 2222"],
                emails=["ana@acme.com"],
                sitio="https://acme.com",
                direccion="Av. Principal 123",
                horario="Lunes a viernes de 9 a 18",
                enlace="https://maps.example/casa-central",
            ),
            BranchInfo(
                tag="norte",
                etiqueta="Norte",
                direccion="Ruta 8 km 50",
                horario="Sábados de 10 a 14",
            ),
        ],
        examples=[
            ExampleItem(pregunta="¿Hacen envíos?", respuesta="Sí, a todo el país."),
            ExampleItem(pregunta="¿Tienen garantía?", respuesta="Un año."),
        ],
    )


def test_parse_of_serialized_canonical_prompt_reproduces_it():
    original = _canonical_prompt()

    parsed = parse_prompt(serialize_prompt(original))

    assert _without_ids(parsed.model_dump()) == _without_ids(original.model_dump())


def test_serialization_is_stable_across_round_trips():
    text = serialize_prompt(_canonical_prompt())

    assert serialize_prompt(parse_prompt(text)) == text


def test_hand_written_prompt_survives_round_trip():
    text = "<assistant><role>X</role><core_rules><rule>A</rule><rule>B</rule></core_rules></assistant>"

    data = parse_prompt(text)
    rendered = serialize_prompt(data)

    assert [rule.texto for rule in data.core_rules] == ["A", "B"]
    assert "    <rule>A</rule>\n    <rule>B</rule>" in rendered
    assert _without_ids(parse_prompt(rendered).model_dump()) == _without_ids(data.model_dump())


def test_phone_and_email_with_separators_survive_round_trip():
    original = PromptData(
        branches=[
            BranchInfo(
                tag="centro",
                etiqueta="Centro",
                responsable="Ana",
                telefonos=["011 4444-5555, int. 12", "011 4444-6666"],
                emails=["ventas@acme.com; reclamos@acme.com"],
            )
        ]
    )

    parsed = parse_prompt(serialize_prompt(original))

    assert parsed.branches[0].telefonos == ["011 4444-5555, int. 12", "011 4444-6666"]
    assert parsed.branches[0].emails == ["ventas@acme.com; reclamos@acme.com"]


def test_branches_differing_only_by_branch_prefix_merge_into_one():
    # "Sucursal Norte" also answers to the key "norte", so it folds into "Norte"
    original = PromptData(
        branches=[
            BranchInfo(tag="norte", etiqueta="Norte", horario="9 a 18"),
            BranchInfo(tag="sucursal_norte", etiqueta="Sucursal Norte", direccion="Ruta 8"),
        ]
    )

    parsed = parse_prompt(serialize_prompt(original))

    assert [branch.etiqueta for branch in parsed.branches] == ["Norte"]
    assert parsed.branches[0].horario == "9 a 18"
    assert parsed.branches[0].direccion == "Ruta 8"
