"""
Locale profiles bundle everything that is tied to one written language:
the keyword taxonomy, the letters the tokenizer must keep, and the name of
the catch-all bucket. Porting the categorizer to another language means
adding a profile here, not touching the matching code.

Taxonomy ordering is significant. Exact matching walks categories in the
order they are declared and keywords in list order, and the first keyword
contained in a description wins. Moving a category up or down (or a
keyword within its list) changes classification outcomes. Note for
instance that the short keyword "br" under "transporte" also matches
"Bradesco" or "Brasil" before "servicos" is ever consulted.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping


@dataclass(frozen=True)
class LocaleProfile:
    name: str
    taxonomy: Mapping[str, tuple[str, ...]]
    # Extra letters kept by the tokenizer on top of ASCII word characters,
    # written as a regex character-class fragment.
    retained_letters: str
    default_category: str = "outros"
    sample_descriptions: tuple[str, ...] = field(default_factory=tuple)
    sample_accounts: tuple[str, ...] = field(default_factory=tuple)


_PT_BR_TAXONOMY: dict[str, tuple[str, ...]] = {
    "alimentacao": (
        "restaurante", "lanchonete", "padaria", "supermercado", "mercado",
        "açougue", "peixaria", "hortifruti", "confeitaria", "pizzaria",
        "churrascaria", "fast food", "delivery", "ifood", "rappi", "food",
        "lanche", "janta", "almoço", "café", "carrefour", "pão de açúcar",
        "extra", "wal-mart", "atacarejo", "assai", "mcdonalds", "burger king",
        "habbibs", "outback", "pizza hut", "domino",
    ),
    "transporte": (
        "uber", "99 taxi", "cabify", "posto", "gasolina", "etanol", "álcool",
        "gnv", "estacionamento", "pedágio", "uberx", "uber select", "comfort",
        "taxi", "metrô", "onibus", "ônibus", "trem", "bike", "patinete",
        "condução", "auto escola", "detran", "ipiranga", "shell", "texaco",
        "petrobras", "br", "loja auto", "pecas", "pneus", "oficina",
        "lavajato", "auto peças",
    ),
    "moradia": (
        "aluguel", "condomínio", "financiamento", "iptu", "água", "luz",
        "energia", "saneamento", "sabesp", "light", "eletropaulo", "cemig",
        "copel", "celg", "reparo", "construção", "reforma",
        "material construção", "loja de tintas", "imobiliária", "imóvel",
        "casa", "apartamento", "edifício", " condomínio",
        "seguro residencial", "seguro casa", "mobília", "decoração",
        "moveis planejados",
    ),
    "saude": (
        "farmácia", "drogaria", "droga raia", "pacheco", "panvel",
        "medicamento", "médico", "dentista", "psicólogo", "nutricionista",
        "academia", "personal", "plano de saúde", "unimed", "amil",
        "bradesco saúde", "sulamerica", "hospital", "clínica", "laboratório",
        "exame", "consulta", "sessão", "fisioterapeuta", "ortopedista",
        "cardiologista", "ginecologista",
    ),
    "lazer": (
        "netflix", "spotify", "prime video", "hbo max", "disney+", "star+",
        "cinema", "teatro", "show", "festival", "parque", "praia", "clube",
        "viagem", "hotel", "pousada", "airbnb", "booking", "decolar", "cvc",
        "game", "steam", "playstation", "xbox", "nintendo", "livraria",
        "livro", "bar", "boate", "balada", "festa", "casino", "bingo",
        "loteria",
    ),
    "compras": (
        "mercado livre", "americanas", "magazine luiza", "casas bahia",
        "fast shop", "riachuelo", "renner", "c&a", "lojas", "shopping",
        "iguatemi", "center", "roupas", "calçados", "bolsas", "acessórios",
        "eletrônicos", "celular", "computador", "notebook", "tv",
        "smartphone", "fone", "headphone", "presente", "brinquedo",
        "cosméticos", "perfume", "joias", "relógio",
    ),
    "educacao": (
        "escola", "faculdade", "universidade", "curso", "pós-graduação",
        "mestrado", "doutorado", "especialização", "livro didático",
        "material escolar", "mensalidade", "anuidade", "matrícula",
        "aula particular", "professor particular", "idiomas", "cursinho",
        "vestibular", "enem", "educação infantil", "creche", "berçário",
    ),
    "servicos": (
        "net", "fibra", "internet", "wifi", "celular", "vivo", "tim", "claro",
        "oi", "netflix", "spotify", "assinatura", "mensalidade", "conta",
        "plano", "seguro", "previdência", "banco", "itau", "bradesco",
        "caixa", "santander", "nubank", "inter", "picpay", "recarga",
        "cartão", "anuidade cartão",
    ),
    "salario": (
        "salário", "salario", "holerite", "contracheque", "pagamento",
        "renda", "ordenado", "vencimento", "crédito salário",
        "depósito salário",
    ),
    "freelance": (
        "freelance", "freela", "pj", "pessoa jurídica", "consultoria",
        "serviços", "projeto", "desenvolvimento", "design", "programação",
        "honorários",
    ),
    "investimentos": (
        "tesouro direto", "cdb", "lci", "lca", "fundo", "renda fixa", "ações",
        "bolsa", "xp investimentos", "nuinvest", "rico", "clear",
        "inter invest", "dividendo", "juros", "rentabilidade", "aplicação",
        "resgate",
    ),
    "outras_receitas": (
        "presente", "doação", "prêmio", "sorteio", "loteria", "bolão",
        "reembolso", "estorno", "devolução", "cashback", "milhas", "bônus",
    ),
}

PT_BR = LocaleProfile(
    name="pt-BR",
    taxonomy=MappingProxyType(_PT_BR_TAXONOMY),
    # Latin-1 letters, excluding the multiplication and division signs.
    retained_letters="À-ÖØ-öø-ÿ",
    default_category="outros",
    sample_descriptions=(
        "Supermercado Carrefour",
        "Restaurante Outback",
        "Posto Ipiranga",
        "Academia Bio Ritmo",
        "Netflix Brasil",
        "Amazon Prime",
        "Loja Americanas",
        "Uber Viagem",
        "Farmácia Droga Raia",
        "Cinema Kinoplex",
        "Salário Mensal",
        "Freelance Development",
        "Rendimento Tesouro Direto",
        "Aluguel Apartamento",
        "Condomínio Edifício",
        "Conta de Luz Light",
        "Net Fibra",
        "Claro Celular",
        "iFood Delivery",
        "Shopping Iguatemi",
    ),
    sample_accounts=("Itaú", "Bradesco", "Caixa", "NuBank", "Inter"),
)

LOCALES: dict[str, LocaleProfile] = {PT_BR.name: PT_BR}

DEFAULT_LOCALE = PT_BR


def get_locale(name: str | None) -> LocaleProfile:
    if not name:
        return DEFAULT_LOCALE
    try:
        return LOCALES[name]
    except KeyError:
        raise ValueError(f"Unknown locale '{name}'. Known: {', '.join(sorted(LOCALES))}") from None
