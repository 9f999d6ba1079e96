import matplotlib.pyplot as plt

BILLION = 1e9


def plot_health_impact(table, outpath, top_n=10, title="Fatalities and injuries by event category"):
    top = table.head(top_n).set_index("category")[["fatalities_total", "injuries_total"]]
    top.columns = ["Fatalities", "Injuries"]
    ax = top.iloc[::-1].plot(kind="barh", figsize=(9, 6))
    ax.set_xlabel("People")
    ax.set_ylabel("")
    plt.title(title)
    plt.tight_layout()
    plt.savefig(outpath)
    plt.close()


def plot_economic_impact(table, outpath, top_n=10, title="Property and crop damage by event category"):
    top = table.head(top_n).set_index("category")[["property_damage_total", "crop_damage_total"]] / BILLION
    top.columns = ["Property", "Crops"]
    ax = top.plot(kind="bar", stacked=True, figsize=(9, 6))
    ax.set_ylabel("Damage (billion USD)")
    ax.set_xlabel("")
    plt.title(title)
    plt.tight_layout()
    plt.savefig(outpath)
    plt.close()
